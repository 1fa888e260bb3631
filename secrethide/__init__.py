"""SecretHide - an email address behind a reCAPTCHA check."""

__version__ = "0.1.0"
