# This file marks the services package for API data-access modules.
# Service modules isolate query execution from transport concerns.
