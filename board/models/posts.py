from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, DateTime, func
from . import Base

NOTICE_CATEGORY = 'notice'
DEFAULT_CATEGORY = 'free'
CATEGORIES = (NOTICE_CATEGORY, DEFAULT_CATEGORY, 'question', 'survey')

class Post(Base):
    __tablename__ = 'posts'
    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(20), nullable=False, default=DEFAULT_CATEGORY, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String(100), nullable=False)
    author_ip = Column(String(45), nullable=True)
    file_name = Column(String(255), nullable=True)
    file_path = Column(String(512), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    view_count = Column(Integer, nullable=False, default=0, server_default='0')
    like_count = Column(Integer, nullable=False, default=0, server_default='0')
    dislike_count = Column(Integer, nullable=False, default=0, server_default='0')
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)
