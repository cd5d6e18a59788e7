"""Forms for the group blueprint."""

from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Email, Length, Optional

from dayshare.forms import JSONForm


class GroupForm(JSONForm):
    """Form for creating a new group."""

    name = StringField("Group Name", validators=[DataRequired(), Length(max=100)])
    description = TextAreaField("Description", validators=[Optional(), Length(max=500)])


class InviteByEmailForm(JSONForm):
    """Form for inviting someone to a group by email."""

    invitedEmail = StringField("Email", validators=[DataRequired(), Email()])


class JoinGroupForm(JSONForm):
    """Form for redeeming an invite code."""

    inviteCode = StringField("Invite Code", validators=[DataRequired(), Length(max=64)])
