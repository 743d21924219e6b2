from app import db
from app.core.db import BaseModel
import logging

logger = logging.getLogger(__name__)

class PostStatus:
    """Enum for post status"""
    DRAFT = 'draft'
    PUBLISHED = 'published'
    TRASH = 'trash'

class Post(BaseModel):
    """Content item (post, page or custom type)"""
    __tablename__ = 'posts'

    title = db.Column(db.String(255), nullable=False, default='')
    content = db.Column(db.Text, nullable=False, default='')
    post_type = db.Column(db.String(20), nullable=False, default='post', index=True)
    status = db.Column(db.String(20), default=PostStatus.DRAFT)

    author_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Relationships
    author = db.relationship('User', backref=db.backref('posts', lazy='dynamic'))
    meta = db.relationship('PostMeta', backref='post', lazy=True,
                           cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Post {self.id} {self.post_type}>'

    @staticmethod
    def create_post(title, content='', post_type='post', author_id=None, status=PostStatus.DRAFT):
        """Create a new post"""
        post = Post(
            title=title,
            content=content,
            post_type=post_type,
            author_id=author_id,
            status=status
        )

        try:
            db.session.add(post)
            db.session.commit()
            logger.info(f"Post created: {post.id} ({post_type})")
            return post
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating post: {str(e)}")
            raise

    @staticmethod
    def get_types(post_ids):
        """Map each existing post ID to its post type"""
        if not post_ids:
            return {}
        rows = db.session.query(Post.id, Post.post_type).filter(Post.id.in_(post_ids)).all()
        return {post_id: post_type for post_id, post_type in rows}

    def delete(self):
        """Delete the post together with its meta"""
        try:
            db.session.delete(self)
            db.session.commit()
            logger.info(f"Post deleted: {self.id}")
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error deleting post {self.id}: {str(e)}")
            raise

class PostMeta(BaseModel):
    """Key/value metadata attached to a post"""
    __tablename__ = 'post_meta'

    post_id = db.Column(db.Integer, db.ForeignKey('posts.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    meta_key = db.Column(db.String(255), nullable=False, index=True)
    meta_value = db.Column(db.Text, nullable=True)

    __table_args__ = (
        db.UniqueConstraint('post_id', 'meta_key', name='uq_post_meta_key'),
    )

    def __repr__(self):
        return f'<PostMeta {self.post_id}:{self.meta_key}>'

    @staticmethod
    def get_value(post_id, meta_key):
        """Get a meta value, or None if the post has none"""
        meta = PostMeta.query.filter_by(post_id=post_id, meta_key=meta_key).first()
        return meta.meta_value if meta else None

    @staticmethod
    def set_value(post_id, meta_key, meta_value):
        """Create or replace a meta value"""
        meta = PostMeta.query.filter_by(post_id=post_id, meta_key=meta_key).first()
        if meta is None:
            meta = PostMeta(post_id=post_id, meta_key=meta_key)
            db.session.add(meta)
        meta.meta_value = meta_value

        try:
            db.session.commit()
            return meta
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error saving meta {meta_key} for post {post_id}: {str(e)}")
            raise
