"""Frontend routes for authentication"""
from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_user, logout_user, login_required, current_user
from app.auth.user import User
import logging

logger = logging.getLogger(__name__)

# Create blueprint
auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

def is_local_path(target):
    """Check a redirect target stays on this site"""
    if not target or not target.startswith('/'):
        return False
    return not target.startswith(('//', '/\\'))

@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """User login page"""
    # Redirect if already logged in
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        username = request.form.get('username')
        password = request.form.get('password')
        remember_me = request.form.get('remember_me', 'false') == 'true'

        # Validate required fields
        if not username or not password:
            flash('Username and password are required', 'danger')
            return render_template('auth/login.html', title='Login')

        # Find user by username or email
        user = User.query.filter((User.username == username) | (User.email == username)).first()

        if user is None or not user.verify_password(password):
            logger.info(f"Failed login attempt for {username}")
            flash('Invalid username or password', 'danger')
            return render_template('auth/login.html', title='Login')

        if not user.is_active:
            flash('This account is inactive. Please contact support.', 'warning')
            return render_template('auth/login.html', title='Login')

        # Log in user
        login_user(user, remember=remember_me)
        user.update_last_login()

        # Redirect to next page if specified, otherwise to home
        next_page = request.args.get('next')
        if is_local_path(next_page):
            return redirect(next_page)

        return redirect(url_for('main.index'))

    return render_template('auth/login.html', title='Login')

@auth_bp.route('/logout')
@login_required
def logout():
    """User logout"""
    logout_user()
    flash('You have been logged out', 'success')
    return redirect(url_for('auth.login'))
