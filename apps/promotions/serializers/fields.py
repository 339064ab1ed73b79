"""
Shared serializer fields for the promotions app.
"""
from rest_framework import serializers


class IdentifierField(serializers.Field):
    """
    Accepts product, category, brand or customer ids from external systems.

    Ids may arrive as integers or strings; booleans and blank strings are
    rejected. Values are kept in the type they were given in, comparisons
    elsewhere are done on their string form.
    """

    default_error_messages = {
        'invalid': 'Identifier must be an integer or a non-empty string.',
    }

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail('invalid')
        if isinstance(data, int):
            return data
        if isinstance(data, str) and data.strip():
            return data.strip()
        self.fail('invalid')

    def to_representation(self, value):
        return value
