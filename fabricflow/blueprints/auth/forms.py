from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Length, Email
from fabricflow.utils.validators import clean_str


class LoginForm(FlaskForm):
    """登录表单 (JSON)"""
    email = StringField('Email', filters=[clean_str], validators=[
        DataRequired(message='The email field is required and must be valid.'),
        Email(message='The email field is required and must be valid.')
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message='The password field is required with minimum 6 characters.'),
        Length(min=6, message='The password field is required with minimum 6 characters.')
    ])
