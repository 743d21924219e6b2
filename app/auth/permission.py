"""Permission definitions for role-based access control"""

class Permission:
    """Permission class for defining access control"""

    # Content permissions
    READ = 'read'
    EDIT_POSTS = 'edit_posts'
    DELETE_POSTS = 'delete_posts'

    # Site permissions
    MANAGE_OPTIONS = 'manage_options'
    MANAGE_USERS = 'manage_users'

    # Plugin permissions
    MANAGE_PLUGINS = 'manage_plugins'

    @classmethod
    def all_permissions(cls):
        """Get all available permissions"""
        permissions = []
        for attr_name in dir(cls):
            if not attr_name.startswith('_') and isinstance(getattr(cls, attr_name), str):
                permissions.append(getattr(cls, attr_name))
        return permissions
