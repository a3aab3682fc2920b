# apps/core/models.py
from django.db import models
from django.contrib.auth.models import User
from django.db.models.signals import post_save
from django.dispatch import receiver


class UserProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')

    username = models.CharField(max_length=50, null=True, blank=True, unique=True)
    name = models.CharField(max_length=100, null=True, blank=True)
    profile_image_url = models.URLField(max_length=500, null=True, blank=True)

    @property
    def display_name(self) -> str:
        # Imię > nick > login z auth
        return (self.name or '').strip() or (self.username or '').strip() or self.user.get_username()

    def __str__(self):
        return f"Profile of {self.user.username}"


# Sygnał: Twórz profil automatycznie przy tworzeniu Usera
@receiver(post_save, sender=User)
def create_user_profile(sender, instance, created, **kwargs):
    if created:
        UserProfile.objects.create(user=instance)


@receiver(post_save, sender=User)
def save_user_profile(sender, instance, **kwargs):
    if hasattr(instance, 'profile'):
        instance.profile.save()
