import uuid

from sightings.models import Comment, DeviceToken, Photo, Report, User


def make_user(**kwargs):
    username = kwargs.pop("username", f"user_{uuid.uuid4().hex[:8]}")
    email = kwargs.pop("email", f"{username}_{uuid.uuid4().hex[:6]}@example.org")
    password = kwargs.pop("password", "Password123")
    return User.objects.create_user(
        username=username,
        email=email,
        password=password,
        display_name=kwargs.pop("display_name", username.title()),
        **kwargs,
    )


def make_admin(**kwargs):
    kwargs.setdefault("username", f"admin_{uuid.uuid4().hex[:8]}")
    return make_user(role=User.ROLE_ADMIN, **kwargs)


def make_photo(*, user=None, title="Double rainbow", **extra):
    if user is None:
        user = make_user()
    return Photo.objects.create(user=user, title=title, description=extra.pop("description", "After the storm"), **extra)


def make_comment(*, photo=None, user=None, content="What a view!", **extra):
    if user is None:
        user = make_user()
    if photo is None:
        photo = make_photo()
    return Comment.objects.create(photo=photo, user=user, content=content, **extra)


def make_report(content, *, reporter=None, reason="Inappropriate", **extra):
    """
    creates a report against a Photo or Comment. pass status/resolved_by to
    build already-reviewed reports directly.
    """
    if reporter is None:
        reporter = make_user()
    return Report.objects.create(
        reporter=reporter,
        reportable_type=type(content).__name__,
        reportable_id=content.pk,
        reason=reason,
        **extra,
    )


def make_resolved_report(content, *, admin=None, **extra):
    if admin is None:
        admin = make_admin()
    return make_report(content, status=Report.STATUS_RESOLVED, resolved_by=admin, **extra)


def make_device_token(user, token=None, platform=DeviceToken.PLATFORM_IOS, **extra):
    return DeviceToken.objects.create(
        user=user,
        token=token or f"fcm-{uuid.uuid4().hex}",
        platform=platform,
        **extra,
    )
