from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone


# CUSTOM USER Manager ---------------------------------------------
class CustomUserManager(BaseUserManager):

    def create_user(self, email, full_name=None, password=None, **extra_fields):
        # Ensure email is provided
        if not email:
            raise ValueError('Email is required')

        extra_fields.setdefault('is_active', True)
        user = self.model(
            email=self.normalize_email(email).lower(),
            full_name=(full_name or '').strip(),
            **extra_fields,
        )
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, full_name=None, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, full_name=full_name, password=password, **extra_fields)


# CUSTOM USER Model -----------------------------------------------
class CustomUser(AbstractBaseUser, PermissionsMixin):
    id = models.BigAutoField(primary_key=True)
    email = models.EmailField(max_length=254, unique=True, verbose_name='Email')
    full_name = models.CharField(max_length=80, verbose_name='Full Name')

    profile_pic = models.CharField(max_length=500, blank=True, default='', verbose_name='Profile Picture')
    university_name = models.CharField(max_length=120, blank=True, default='', verbose_name='University Name')
    job = models.CharField(max_length=120, blank=True, default='', verbose_name='Job')

    last_active = models.DateTimeField(default=timezone.now, verbose_name='Last Active')
    date_joined = models.DateTimeField(default=timezone.now, verbose_name='Date Joined')
    is_active = models.BooleanField(default=True, verbose_name='Is Active')
    is_staff = models.BooleanField(default=False, verbose_name='Is Staff')

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['full_name']

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return self.full_name or self.email

    def touch_last_active(self):
        CustomUser.objects.filter(pk=self.pk).update(last_active=timezone.now())
