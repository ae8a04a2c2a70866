from django.apps import AppConfig

class SightingsConfig(AppConfig):
    """Django app config for rainbow sightings and their moderation."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'sightings'
    verbose_name = 'Rainbow sightings'
