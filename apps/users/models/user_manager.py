from django.contrib.auth.models import BaseUserManager


class FestUserManager(BaseUserManager):
    '''
    Custom user manager for the fest user model
    '''
    def create_user(self, email=None, password=None, **extra_fields):
        if not email:
            raise ValueError("Users must have an email address")
        if not extra_fields.get("first_name"):
            raise ValueError("Users must have a first name")

        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "superadmin")
        return self.create_user(email, password, **extra_fields)
