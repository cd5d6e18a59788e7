"""Forms for the AI blueprint."""

from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from dayshare.forms import JSONForm


class ChatForm(JSONForm):
    """Form for one message to the writing assistant."""

    message = TextAreaField("Message", validators=[DataRequired(), Length(max=4000)])
    groupId = StringField("Group", validators=[Optional()])
    context = TextAreaField("Context", validators=[Optional(), Length(max=4000)])
