"""Forms for the entry blueprint."""

from wtforms import BooleanField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from dayshare.forms import JSONForm, StringListField


class DraftForm(JSONForm):
    """Form for autosaving an in-progress entry."""

    title = StringField("Title", validators=[Optional(), Length(max=200)])
    content = TextAreaField("Content", validators=[Optional(), Length(max=20000)])
    photos = StringListField("Photos")
    isQuickReflection = BooleanField("Quick Reflection")


class EntryForm(DraftForm):
    """Form for submitting a journal entry."""

    content = TextAreaField("Content", validators=[DataRequired(), Length(max=20000)])
    tags = StringListField("Tags")


class UploadForm(JSONForm):
    """Form for requesting a photo upload URL."""

    contentType = StringField("Content Type", validators=[Optional(), Length(max=100)])

