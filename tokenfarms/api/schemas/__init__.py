# This file marks the schemas package for API request and response models.
# Grouping contracts here keeps validation rules easy to find.
