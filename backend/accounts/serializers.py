from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework import serializers

from .models import User
from riders.models import RiderProfile
from services.wallet_ledger import create_wallet


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="display_name", read_only=True)
    is_premium = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "name",
            "email",
            "role",
            "phone_number",
            "is_subscriber",
            "subscription_type",
            "subscription_expires_at",
            "is_premium",
            "loyalty_points",
            "verification_badge",
        ]
        read_only_fields = [
            "id",
            "is_subscriber",
            "subscription_type",
            "subscription_expires_at",
            "loyalty_points",
            "verification_badge",
        ]


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(username=data["username"], password=data["password"])
        if not user:
            raise serializers.ValidationError("Invalid username or password")
        return user


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)
    # Admins are created through the admin site only
    role = serializers.ChoiceField(
        choices=[(User.ROLE_RIDER, 'Rider'), (User.ROLE_PARTNER, 'Partner')],
        default=User.ROLE_RIDER,
    )

    class Meta:
        model = User
        fields = ['username', 'password', 'email', 'first_name', 'last_name', 'role', 'phone_number']

    def validate_email(self, value):
        if value and User.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email already exists")
        return value

    @transaction.atomic
    def create(self, validated_data):
        password = validated_data.pop('password')
        user = User.objects.create_user(password=password, **validated_data)

        # Riders get their profile and wallet in the same transaction
        if user.role == User.ROLE_RIDER:
            RiderProfile.objects.create(user=user)
            create_wallet(user)

        return user
