"""Admin and public routes for posts"""
from flask import Blueprint, render_template, redirect, url_for, flash, request, g, abort, jsonify, current_app
from flask_login import current_user
from app.auth.permission import Permission
from app.auth.rbac import permission_required
from app.content.content_type import get_content_types
from app.content.post import Post, PostStatus
from app.content.shortcodes import ShortcodeRegistry
from app.core.error_handlers import ApiError
from app.plugins.plugin_manager import get_plugin_manager
from app import db
import logging

logger = logging.getLogger(__name__)

# Create blueprints
content_bp = Blueprint('content', __name__, url_prefix='/admin/posts')
site_bp = Blueprint('site', __name__, url_prefix='/posts')

BUILTIN_COLUMNS = ('title', 'author', 'status', 'date')

def get_content_type_or_404(post_type):
    content_type = get_content_types().get(post_type)
    if content_type is None:
        abort(404)
    return content_type

def plugins_with(hook):
    """Active plugin instances implementing a hook"""
    return [
        instance for instance in get_plugin_manager().get_active_instances()
        if hasattr(instance, hook)
    ]

def list_columns(post_type):
    """Columns of the list table for a post type, including plugin columns"""
    columns = [('title', 'Title'), ('author', 'Author'), ('status', 'Status'), ('date', 'Date')]
    for instance in plugins_with('get_list_columns'):
        columns = instance.get_list_columns(post_type, columns)
    return columns

def sortable_columns(post_type):
    sortable = {'title': 'title', 'date': 'date'}
    for instance in plugins_with('get_sortable_columns'):
        sortable = instance.get_sortable_columns(post_type, sortable)
    return sortable

def render_custom_columns(columns, post):
    """Render plugin-provided cells for one row"""
    cells = {}
    for key, _ in columns:
        if key in BUILTIN_COLUMNS:
            continue
        for instance in plugins_with('render_list_column'):
            html = instance.render_list_column(key, post)
            if html is not None:
                cells[key] = html
                break
    return cells

def run_save_hooks(post, form):
    """Let plugins save their fields for a post"""
    for instance in plugins_with('save_post'):
        instance.save_post(post, form)

@content_bp.route('/')
@permission_required(Permission.EDIT_POSTS)
def index():
    """Post list table"""
    post_type = request.args.get('post_type', 'post')
    content_type = get_content_type_or_404(post_type)

    orderby = request.args.get('orderby', 'date')
    order = 'asc' if request.args.get('order') == 'asc' else 'desc'
    page = request.args.get('page', 1, type=int)

    columns = list_columns(post_type)
    sortable = sortable_columns(post_type)

    query = Post.query.filter(Post.post_type == post_type, Post.status != PostStatus.TRASH)

    if orderby == 'title':
        query = query.order_by(Post.title.asc() if order == 'asc' else Post.title.desc())
    elif orderby in sortable and orderby != 'date':
        for instance in plugins_with('apply_orderby'):
            query = instance.apply_orderby(query, orderby, order)
    else:
        query = query.order_by(Post.created_at.asc() if order == 'asc' else Post.created_at.desc(), Post.id)

    posts = query.paginate(page=page, per_page=current_app.config['POSTS_PER_PAGE'], error_out=False)
    rows = [(post, render_custom_columns(columns, post)) for post in posts.items]

    inline_fields = []
    for instance in plugins_with('get_inline_edit_fields'):
        inline_fields.extend(instance.get_inline_edit_fields(post_type))

    return render_template('content/posts.html',
                           title=content_type.label,
                           content_type=content_type,
                           columns=columns,
                           sortable=sortable,
                           orderby=orderby,
                           order=order,
                           rows=rows,
                           pagination=posts,
                           inline_fields=inline_fields)

@content_bp.route('/new', methods=['GET', 'POST'])
@permission_required(Permission.EDIT_POSTS)
def create():
    """Create a post and continue on its edit screen"""
    post_type = request.args.get('post_type', 'post')
    content_type = get_content_type_or_404(post_type)

    if request.method == 'POST':
        title = request.form.get('title', '').strip()
        if not title:
            flash('Title is required', 'danger')
            return render_template('content/edit_post.html', title=f'New {content_type.label}',
                                   post=None, content_type=content_type, meta_boxes=[])

        post = Post.create_post(
            title=title,
            content=request.form.get('content', ''),
            post_type=post_type,
            author_id=current_user.id,
            status=request.form.get('status', PostStatus.DRAFT)
        )
        flash('Post created', 'success')
        return redirect(url_for('content.edit', post_id=post.id))

    return render_template('content/edit_post.html', title=f'New {content_type.label}',
                           post=None, content_type=content_type, meta_boxes=[])

@content_bp.route('/<int:post_id>/edit', methods=['GET', 'POST'])
@permission_required(Permission.EDIT_POSTS)
def edit(post_id):
    """Post edit screen with plugin meta boxes"""
    post = db.get_or_404(Post, post_id)
    content_type = get_content_type_or_404(post.post_type)

    if request.method == 'POST':
        post.title = request.form.get('title', post.title)
        post.content = request.form.get('content', post.content)
        post.status = request.form.get('status', post.status)

        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating post {post.id}: {str(e)}")
            raise

        run_save_hooks(post, request.form)
        flash('Post updated', 'success')
        return redirect(url_for('content.edit', post_id=post.id))

    meta_boxes = []
    for instance in plugins_with('get_meta_boxes'):
        meta_boxes.extend(instance.get_meta_boxes(post))

    return render_template('content/edit_post.html',
                           title=f'Edit {post.title}',
                           post=post,
                           content_type=content_type,
                           meta_boxes=meta_boxes)

@content_bp.route('/<int:post_id>/inline-save', methods=['POST'])
@permission_required(Permission.EDIT_POSTS)
def inline_save(post_id):
    """Save a post from the quick edit row of the list table"""
    post = db.session.get(Post, post_id)
    if post is None:
        raise ApiError('Post not found', 404)

    title = request.form.get('title')
    if title is not None and title.strip():
        post.title = title.strip()
        db.session.commit()

    run_save_hooks(post, request.form)

    columns = list_columns(post.post_type)
    cells = render_custom_columns(columns, post)
    return jsonify({
        'status': 'success',
        'data': {
            'id': post.id,
            'title': post.title,
            'columns': {key: str(html) for key, html in cells.items()}
        }
    })

@content_bp.route('/<int:post_id>/delete', methods=['POST'])
@permission_required(Permission.DELETE_POSTS)
def delete(post_id):
    """Delete a post and its meta"""
    post = db.get_or_404(Post, post_id)
    post_type = post.post_type
    post.delete()
    flash('Post deleted', 'success')
    return redirect(url_for('content.index', post_type=post_type))

@site_bp.route('/<int:post_id>')
def view(post_id):
    """Public post page with shortcodes expanded"""
    post = db.get_or_404(Post, post_id)
    if post.status != PostStatus.PUBLISHED and not current_user.has_permission(Permission.EDIT_POSTS):
        abort(404)

    shortcodes = ShortcodeRegistry()
    for instance in plugins_with('get_shortcodes'):
        for tag, handler in instance.get_shortcodes().items():
            shortcodes.add(tag, handler)

    g.current_post = post
    try:
        body = shortcodes.expand(post.content)
    finally:
        g.pop('current_post', None)

    return render_template('content/view_post.html', title=post.title, post=post, body=body)
