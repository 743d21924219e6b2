"""Forms for the Post Notes plugin"""
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectMultipleField
from wtforms.validators import Length

class SettingsForm(FlaskForm):
    """Form for the Post Notes settings page"""
    post_types = SelectMultipleField('Post types', choices=[],
                                     description='Apply Post Notes to these post types')
    notes_label = StringField('Notes label', validators=[Length(max=255)])
    notes_placeholder = TextAreaField('Notes placeholder', description=(
        'It will be displayed on a post edit page as a help message inside the note field.'
    ))
