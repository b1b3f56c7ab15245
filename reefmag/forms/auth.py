"""Account forms."""

from __future__ import annotations

from wtforms import EmailField, PasswordField, StringField
from wtforms.validators import DataRequired, Email, Length, Optional

from reefmag.forms.content import ApiForm, strip


class RegisterForm(ApiForm):
    email = EmailField("Email", filters=[strip], validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired(), Length(min=6, max=72)])
    first_name = StringField("First name", name='firstName', filters=[strip], validators=[Optional(), Length(max=120)])


class LoginForm(ApiForm):
    email = StringField("Email", filters=[strip], validators=[DataRequired()])
    password = PasswordField("Password", validators=[DataRequired()])


class RecoverAccountForm(ApiForm):
    email = EmailField("Email", filters=[strip], validators=[DataRequired(), Email()])
