from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

CustomUser = get_user_model()


# PUBLIC USER Serializer -----------------------------------------
class SimpleCustomUserSerializer(serializers.ModelSerializer):
    """Public profile fields attached to posts, comments, reactions and groups."""
    fullName = serializers.CharField(source='full_name', read_only=True)
    profilePic = serializers.CharField(source='profile_pic', read_only=True)
    universityName = serializers.CharField(source='university_name', read_only=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'fullName', 'email', 'profilePic', 'job', 'universityName']
        read_only_fields = fields


# PROFILE Serializer ---------------------------------------------
class CustomUserSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source='full_name', max_length=80, required=False)
    profilePic = serializers.CharField(source='profile_pic', required=False, allow_blank=True)
    universityName = serializers.CharField(source='university_name', max_length=120, required=False, allow_blank=True)
    lastActive = serializers.DateTimeField(source='last_active', read_only=True)
    createdAt = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'fullName', 'profilePic', 'universityName', 'job', 'lastActive', 'createdAt']
        read_only_fields = ['id', 'email', 'lastActive', 'createdAt']


# SIGNUP Serializer ----------------------------------------------
class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    fullName = serializers.CharField(max_length=80)
    password = serializers.CharField(write_only=True, min_length=6)

    def validate_email(self, value):
        email = value.strip().lower()
        if CustomUser.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("Email already exists")
        return email

    def validate_fullName(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Full name is required")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    def create(self, validated_data):
        return CustomUser.objects.create_user(
            email=validated_data['email'],
            full_name=validated_data['fullName'],
            password=validated_data['password'],
        )
