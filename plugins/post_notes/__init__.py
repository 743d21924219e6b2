"""Post Notes plugin: a free-text note on posts, pages and custom types"""

def setup():
    """Setup function called during plugin discovery"""
    return {
        'name': 'Simple Post Notes',
        'slug': 'post-notes',
        'version': '1.7.8',
        'description': 'Adds simple notes to post, pages and custom post type edit screen.',
        'author': 'BracketSpace',
        'homepage': 'https://bracketspace.com',
        'entry_point': 'post_notes.plugin:PostNotesPlugin',
        'config_schema': {
            'type': 'object',
            'properties': {
                'columns_display': {
                    'type': 'boolean',
                    'title': 'Display Note Column',
                    'description': 'Show the note column in post list tables',
                    'default': True
                },
                'hidden_column_types': {
                    'type': 'array',
                    'title': 'Hide Column For',
                    'description': 'Post types whose list table does not show the note column',
                    'default': []
                },
                'unsortable_types': {
                    'type': 'array',
                    'title': 'Unsortable Post Types',
                    'description': 'Post types whose note column cannot be sorted',
                    'default': []
                }
            }
        },
        'is_system': False
    }
