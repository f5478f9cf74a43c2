# models.py - Flask-SQLAlchemy models for the Intern Portal
from datetime import datetime, timezone
from decimal import Decimal
import enum
from sqlalchemy import UniqueConstraint, Index, text
from flask_login import UserMixin
from extensions import db
from werkzeug.security import check_password_hash, generate_password_hash

# ===========================================================
# ENUM DEFINITIONS
# ===========================================================

class UserRole(enum.Enum):
    INTERN = "intern"
    ADMIN = "admin"


def utcnow():
    return datetime.now(timezone.utc)


def isoformat_or_none(value):
    return value.isoformat() if value else None


# ===========================================================
# BASE MIXIN FOR COMMON FIELDS
# ===========================================================

class BaseMixin:
    """Provides created_at and updated_at timestamps to inheriting models."""
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True),
                           default=utcnow,
                           onupdate=utcnow)

# ===========================================================
# USER MODELS
# ===========================================================

class User(UserMixin, db.Model, BaseMixin):
    """Intern account with its donation total and referral link."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=UserRole.INTERN.value, index=True)

    referral_code = db.Column(db.String(64), unique=True, nullable=False)  # User's own referral code
    referred_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)  # ID of user who referred this user

    total_donations = db.Column(db.Numeric(18, 2), nullable=False, default=Decimal("0.00"),
                                server_default=text("0.00"))
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # Relationships
    referrer = db.relationship('User', remote_side=[id], backref=db.backref('referrals', lazy='dynamic'))
    rewards = db.relationship('Reward', back_populates='user', order_by='Reward.id',
                              cascade="all,delete-orphan")

    __table_args__ = (
        Index('idx_user_active_donations', 'is_active', 'total_donations'),
    )

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @classmethod
    def find_by_referral_code(cls, code):
        if not code:
            return None
        return cls.query.filter_by(referral_code=code).first()

    def to_dict(self):
        """Serialize user for JSON responses."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "referralCode": self.referral_code,
            "totalDonations": float(self.total_donations or 0),
            "rewards": [reward.to_dict() for reward in self.rewards],
            "isActive": self.is_active,
            "createdAt": isoformat_or_none(self.created_at),
        }

    def __repr__(self):
        return f"<User {self.id} {self.email}>"

# ===========================================================
# REWARDS
# ===========================================================

class Reward(db.Model):
    """One unlocked badge per (user, name); rows are appended, never edited."""
    __tablename__ = 'rewards'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(80), nullable=False)
    description = db.Column(db.String(255))
    unlocked = db.Column(db.Boolean, nullable=False, default=False)
    unlocked_at = db.Column(db.DateTime(timezone=True), nullable=True)

    user = db.relationship('User', back_populates='rewards')

    __table_args__ = (
        UniqueConstraint('user_id', 'name', name='uq_rewards_user_name'),
    )

    def to_dict(self):
        return {
            "name": self.name,
            "description": self.description,
            "unlocked": self.unlocked,
            "unlockedAt": isoformat_or_none(self.unlocked_at),
        }
