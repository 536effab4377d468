"""
Book catalog models - subjects, books and their chapters

Owned by the catalog side of the platform; the quiz services only read them
(subject labels for quizzes, chapter metadata for quiz documents).
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subject_id = Column(Uuid, unique=True, nullable=False, default=uuid.uuid4)
    subject_name = Column(String(100), nullable=False)

    def __repr__(self):
        return f"<Subject(name={self.subject_name})>"


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Uuid, unique=True, nullable=False, index=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.id"))
    is_private = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Uuid, index=True)

    subject = relationship("Subject")
    chapters = relationship("Chapter", back_populates="book")

    def __repr__(self):
        return f"<Book(book_id={self.book_id}, name={self.name})>"


class Chapter(Base):
    """
    Chapters table - a chapter document stored behind chapter_url
    """
    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    book_id = Column(Integer, ForeignKey("books.id"))
    chapter_name = Column(String(255), nullable=False)
    description = Column(Text)
    chapter_url = Column(String(1024), nullable=False, index=True)

    book = relationship("Book", back_populates="chapters")

    def __repr__(self):
        return f"<Chapter(name={self.chapter_name})>"
