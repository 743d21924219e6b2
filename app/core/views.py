from flask import Blueprint, render_template
from flask_login import current_user
from app.auth.permission import Permission
from app.content.content_type import get_content_types
from app.content.post import Post, PostStatus
from app.plugins.plugin import Plugin
from sqlalchemy import func
from app import db
main_bp = Blueprint('main', __name__)

@main_bp.route('/')
def index():
    """Main application dashboard"""
    counts = dict(
        db.session.query(Post.post_type, func.count(Post.id))
        .filter(Post.status != PostStatus.TRASH)
        .group_by(Post.post_type)
        .all()
    )

    content_types = [
        (content_type, counts.get(content_type.name, 0))
        for content_type in get_content_types().get_post_types(public=True)
    ]

    plugins = []
    if current_user.has_permission(Permission.MANAGE_PLUGINS):
        plugins = Plugin.query.order_by(Plugin.name).all()

    return render_template('dashboard/index.html',
                           title='Dashboard',
                           content_types=content_types,
                           plugins=plugins)

@main_bp.route('/health')
def health_check():
    """Health check endpoint"""
    return {'status': 'ok', 'message': 'Service is running'}
