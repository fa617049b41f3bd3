"""
SQLAlchemy数据库模型

所有时间字段均为 UTC（不带时区），SQLite 中以 ISO-8601 字符串存储，可按字典序比较
"""

from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey, Index, CheckConstraint
)

from game_advisor.database.connection import Base


class UserProfile(Base):
    """Steam 用户资料缓存表"""
    __tablename__ = 'user_profiles'

    steam_id = Column(String, primary_key=True)
    display_name = Column(String, nullable=False)
    avatar_url = Column(String)
    profile_url = Column(String)
    last_synced_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<UserProfile(steam_id='{self.steam_id}', display_name='{self.display_name}')>"


class Game(Base):
    """游戏元数据缓存表"""
    __tablename__ = 'games'

    app_id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(String)
    short_description = Column(Text)
    header_image = Column(String)
    developers = Column(Text)  # JSON字符串存储
    publishers = Column(Text)  # JSON字符串存储
    metacritic_score = Column(Integer)
    release_date = Column(String)
    price = Column(String)  # 已格式化的价格文本
    last_fetched_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Game(app_id={self.app_id}, name='{self.name}')>"


class GameGenre(Base):
    """游戏品类表（多对多）"""
    __tablename__ = 'game_genres'

    app_id = Column(Integer, ForeignKey('games.app_id', ondelete='CASCADE'), primary_key=True)
    genre = Column(String, primary_key=True)

    def __repr__(self):
        return f"<GameGenre(app_id={self.app_id}, genre='{self.genre}')>"


class GameTag(Base):
    """社区标签表（多对多，带排名）"""
    __tablename__ = 'game_tags'

    app_id = Column(Integer, ForeignKey('games.app_id', ondelete='CASCADE'), primary_key=True)
    tag = Column(String, primary_key=True)
    rank = Column(Integer, default=0)

    def __repr__(self):
        return f"<GameTag(app_id={self.app_id}, tag='{self.tag}', rank={self.rank})>"


class UserGame(Base):
    """用户游戏库快照表"""
    __tablename__ = 'user_games'

    steam_id = Column(String, primary_key=True)
    app_id = Column(Integer, primary_key=True)
    playtime_forever = Column(Integer, default=0)  # 分钟
    playtime_2weeks = Column(Integer, default=0)   # 分钟
    last_played_at = Column(Integer)               # Unix时间戳
    synced_at = Column(DateTime, nullable=False)

    __table_args__ = (
        Index('idx_user_games_synced', 'steam_id', 'synced_at'),
    )

    def __repr__(self):
        return f"<UserGame(steam_id='{self.steam_id}', app_id={self.app_id})>"


class Recommendation(Base):
    """AI 推荐结果缓存表（只追加）"""
    __tablename__ = 'recommendations'

    id = Column(Integer, primary_key=True, autoincrement=True)
    steam_id = Column(String, nullable=False)
    source_app_id = Column(Integer)
    rec_type = Column(String, nullable=False)
    result_json = Column(Text, nullable=False)  # 不透明的序列化结果
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False)

    __table_args__ = (
        CheckConstraint("rec_type IN ('similar', 'library', 'general')", name='ck_recommendations_rec_type'),
        CheckConstraint("expires_at > created_at", name='ck_recommendations_expiry'),
        Index('idx_recommendations_lookup', 'steam_id', 'rec_type', 'source_app_id'),
    )

    def __repr__(self):
        return f"<Recommendation(id={self.id}, steam_id='{self.steam_id}', rec_type='{self.rec_type}')>"


class RecommendationFeedback(Base):
    """推荐反馈表"""
    __tablename__ = 'recommendation_feedback'

    steam_id = Column(String, primary_key=True)
    recommended_app_id = Column(Integer, primary_key=True)
    action = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False)

    __table_args__ = (
        CheckConstraint("action IN ('saved', 'dismissed', 'clicked')", name='ck_feedback_action'),
    )

    def __repr__(self):
        return f"<RecommendationFeedback(steam_id='{self.steam_id}', app_id={self.recommended_app_id}, action='{self.action}')>"


class GameStatus(Base):
    """用户游戏状态表"""
    __tablename__ = 'game_statuses'

    steam_id = Column(String, primary_key=True)
    app_id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    status = Column(String, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    __table_args__ = (
        CheckConstraint("status IN ('played', 'liked', 'not_interested')", name='ck_game_statuses_status'),
    )

    def __repr__(self):
        return f"<GameStatus(steam_id='{self.steam_id}', app_id={self.app_id}, status='{self.status}')>"
