"""Shared form helpers for the JSON endpoints.

Flask-WTF reads JSON request bodies into form data, so the blueprints
validate their payloads with regular WTForms forms. CSRF is enforced
app-wide by ``CSRFProtect``, so the per-form token is disabled.
"""

from flask_wtf import FlaskForm
from wtforms import Field

from dayshare.errors import ValidationError


class StringListField(Field):
    """A field holding a JSON array of strings."""

    def process_formdata(self, valuelist):
        """Keep the non-blank values, in order."""
        self.data = [str(v).strip() for v in valuelist if v is not None and str(v).strip()]

    def _value(self):
        return ",".join(self.data or [])


class JSONForm(FlaskForm):
    """Base form for JSON endpoints."""

    class Meta:
        csrf = False

    def validate_or_raise(self):
        """Validate the submitted payload, raising ValidationError on failure."""
        if not self.validate_on_submit():
            raise ValidationError(self.first_error())

    def first_error(self):
        """Return the first validation error as a readable message."""
        for field_name, errors in self.errors.items():
            if errors:
                return f"{field_name}: {errors[0]}"
        return "Invalid request body."
