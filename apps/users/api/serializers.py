from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils.translation import gettext_lazy as _

from apps.users.models import FestUser
from core.exceptions import ConflictError


class FestUserSerializer(serializers.ModelSerializer):
    '''
    Full profile of a user, used for the "me" endpoint and admin listings.
    '''
    full_name = serializers.CharField(source="get_full_name", read_only=True)
    role_display = serializers.CharField(source="get_role_display", read_only=True)

    class Meta:
        model = get_user_model()
        fields = [
            "id", "email", "first_name", "last_name", "full_name",
            "role", "role_display",
            "phone", "date_of_birth", "gender", "city", "state", "institute_name",
            "date_joined",
        ]
        read_only_fields = ["id", "email", "role", "role_display", "date_joined"]


class SimplifiedFestUserSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source="get_full_name", read_only=True)

    class Meta:
        model = get_user_model()
        fields = ["id", "email", "full_name"]


class PersonalInfoSerializer(serializers.Serializer):
    '''
    Personal details every registration flow collects and copies onto the profile.

    Example API object:
    {
        "phone": "9999999999",
        "date_of_birth": "2000-01-01",
        "gender": "Male",
        "city": "Pune",
        "state": "Maharashtra",
        "institute_name": "College of Engineering"
    }
    '''
    phone = serializers.RegexField(
        regex=r"^\+?[0-9]{10,15}$",
        error_messages={"invalid": _("Phone number must contain 10 to 15 digits.")}
    )
    date_of_birth = serializers.DateField()
    gender = serializers.ChoiceField(choices=FestUser.GenderType.choices)
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    institute_name = serializers.CharField(max_length=200)

    def to_internal_value(self, data):
        # accept the camelCase keys older clients send
        if hasattr(data, "get") and "instituteName" in data and "institute_name" not in data:
            data = {**data, "institute_name": data.get("instituteName")}
        if hasattr(data, "get") and "dateOfBirth" in data and "date_of_birth" not in data:
            data = {**data, "date_of_birth": data.get("dateOfBirth")}
        return super().to_internal_value(data)


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=FestUser.GlobalRole.choices)


class SignupSerializer(serializers.ModelSerializer):
    '''
    Self-service account creation. New accounts always get the participant role.

    Example API object:
    {
        "email": "priya@example.com",
        "password": "a-long-passphrase",
        "first_name": "Priya",
        "last_name": "Sharma"
    }
    '''
    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    class Meta:
        model = get_user_model()
        fields = ["email", "password", "first_name", "last_name"]
        extra_kwargs = {
            # uniqueness is checked case-insensitively in validate_email
            "email": {"validators": []},
            "first_name": {"required": True, "allow_blank": False},
        }

    def validate_email(self, value):
        value = value.strip().lower()
        if get_user_model().objects.filter(email=value).exists():
            raise serializers.ValidationError(_("This email is already registered."))
        return value

    def validate(self, attrs):
        candidate = get_user_model()(
            email=attrs["email"],
            first_name=attrs.get("first_name", ""),
            last_name=attrs.get("last_name", ""),
        )
        try:
            validate_password(attrs["password"], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    def create(self, validated_data):
        try:
            with transaction.atomic():
                return get_user_model().objects.create_user(**validated_data)
        except IntegrityError:
            # lost a race with a concurrent signup for the same address
            raise ConflictError(_("This email is already registered."))
