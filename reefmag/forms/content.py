"""Request forms for the content collections.

Forms read multipart or JSON bodies alike. Field names on the wire follow the
stored record keys (``publishedDate``, ``eventDate``).
"""

from __future__ import annotations

from typing import Any

from flask import request
from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField
from werkzeug.datastructures import FileStorage, ImmutableMultiDict
from wtforms import BooleanField, EmailField, IntegerField, StringField, TextAreaField
from wtforms.validators import AnyOf, Email, Length, NumberRange, Optional

from reefmag.errors import ValidationError

STATUSES = ['active', 'inactive']
FALSE_VALUES = (False, 0, 'false', 'False', '0', 'off', '')
IMAGE_TYPES = ['png', 'jpg', 'jpeg', 'gif', 'webp', 'svg']
JSON_METHODS = frozenset({'POST', 'PUT', 'PATCH'})


def strip(value):
    return value.strip() if isinstance(value, str) else value


class ApiForm(FlaskForm):
    """JSON/multipart API form; CSRF is not used for the API."""

    class Meta:
        csrf = False

    def __init__(self, *args, **kwargs):
        if 'formdata' not in kwargs and request.is_json and request.method in JSON_METHODS:
            kwargs['formdata'] = json_formdata(request.get_json())
        super().__init__(*args, **kwargs)


def json_formdata(payload: Any) -> ImmutableMultiDict:
    """
    Turn a JSON object into string form data.

    Numbers and booleans become their text form and null becomes an empty
    value, so WTForms filters and validators only ever see strings.

    Raises:
        ValidationError: body is not an object, or a value is a list or object
    """
    if not isinstance(payload, dict):
        raise ValidationError('Invalid request')

    items: list[tuple[str, str]] = []
    errors: dict[str, list[str]] = {}
    for key, value in payload.items():
        if value is None:
            value = ''
        elif isinstance(value, bool):
            value = 'true' if value else 'false'
        elif isinstance(value, (int, float, str)):
            value = str(value)
        else:
            errors[key] = ['Expected a single value.']
            continue
        items.append((key, value))

    if errors:
        raise ValidationError('Invalid request', fields=errors)
    return ImmutableMultiDict(items)


def form_data(form: FlaskForm, partial: bool = False) -> dict[str, Any]:
    """
    Validate a form and collect its non-file values keyed by wire name.

    Args:
        form: Bound form
        partial: Only validate and return the fields present in the request

    Raises:
        ValidationError: with per-field messages
    """
    data: dict[str, Any] = {}
    errors: dict[str, list[str]] = {}
    for field in form:
        provided = bool(getattr(field, 'raw_data', None))
        if partial and not provided:
            continue
        if not field.validate(form):
            errors[field.name] = list(field.errors)
            continue
        if not isinstance(field, FileField):
            data[field.name] = field.data
    if errors:
        raise ValidationError('Invalid request', fields=errors)
    return data


def form_files(form: FlaskForm) -> dict[str, FileStorage]:
    return {
        field.name: field.data
        for field in form
        if isinstance(field, FileField) and isinstance(field.data, FileStorage) and field.data.filename
    }


def _status():
    return StringField('Status', default='active', filters=[strip], validators=[Optional(), AnyOf(STATUSES)])


def _featured():
    return BooleanField('Featured', default=False, false_values=FALSE_VALUES)


def _title():
    return StringField('Title', filters=[strip], validators=[Optional(), Length(max=255)])


def _website():
    return StringField('Website', filters=[strip], validators=[Optional(), Length(max=500)])


def _sort():
    return IntegerField('Sort', validators=[Optional(), NumberRange(min=0)])


def _image():
    return FileField('Image', validators=[Optional(), FileAllowed(IMAGE_TYPES, 'Images only!')])


class MagazineForm(ApiForm):
    title = _title()
    published_date = StringField('Published date', name='publishedDate', filters=[strip], validators=[Optional(), Length(max=64)])
    year = IntegerField('Year', validators=[Optional(), NumberRange(min=1900, max=2999)])
    featured = _featured()
    status = _status()
    pdf = FileField('PDF', validators=[Optional(), FileAllowed(['pdf'], 'PDF only!')])
    cover = FileField('Cover', validators=[Optional(), FileAllowed(IMAGE_TYPES, 'Images only!')])
    splitted_pdf = FileField('Split PDF', validators=[Optional(), FileAllowed(['pdf'], 'PDF only!')])


class AdvertiserForm(ApiForm):
    title = _title()
    website = _website()
    status = _status()


class SponsorForm(ApiForm):
    title = _title()
    website = _website()
    status = _status()
    image = _image()


class ReefClubForm(ApiForm):
    title = _title()
    city = StringField('City', filters=[strip], validators=[Optional(), Length(max=120)])
    state = StringField('State', filters=[strip], validators=[Optional(), Length(max=120)])
    website = _website()
    status = _status()
    sort = _sort()


class EventForm(ApiForm):
    title = _title()
    description = TextAreaField('Description', filters=[strip], validators=[Optional()])
    event_date = StringField('Event date', name='eventDate', filters=[strip], validators=[Optional(), Length(max=64)])
    status = _status()
    featured = _featured()
    sort = _sort()


class NewsForm(ApiForm):
    title = _title()
    description = TextAreaField('Description', filters=[strip], validators=[Optional()])
    status = _status()
    featured = _featured()


class ProductForm(ApiForm):
    title = _title()
    website = _website()
    status = _status()
    image = _image()


class MemberForm(ApiForm):
    email = EmailField('Email', filters=[strip], validators=[Optional(), Email()])
    country = StringField('Country', filters=[strip], validators=[Optional(), Length(max=120)])
    registration = StringField('Registration', filters=[strip], validators=[Optional(), Length(max=64)])
    activation = StringField('Activation', filters=[strip], validators=[Optional(), Length(max=64)])
    status = _status()


class UserForm(ApiForm):
    email = EmailField('Email', filters=[strip], validators=[Optional(), Email()])


COLLECTION_FORMS = {
    'magazines': MagazineForm,
    'advertisers': AdvertiserForm,
    'sponsors': SponsorForm,
    'reefclubs': ReefClubForm,
    'events': EventForm,
    'news': NewsForm,
    'products': ProductForm,
    'members': MemberForm,
    'users': UserForm,
}
