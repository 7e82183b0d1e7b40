from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base for the model serializers of every app.

    Engine entities (orders, tables, bills, reservations) are written only
    through their services, so their serializers mark every field read-only.
    Plain catalogue data such as menu items is saved directly.
    """


class TimestampedSerializer(BaseModelSerializer):
    """Serializer for models carrying created_at / updated_at."""

    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
