from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Integer, Numeric, Text, false
from sqlalchemy.orm import relationship

from .database import Base


class Company(Base):
    __tablename__ = "companies"
    __table_args__ = (CheckConstraint("num_employees >= 0", name="companies_num_employees_check"),)

    handle = Column(Text, primary_key=True)
    name = Column(Text, unique=True, nullable=False)
    num_employees = Column(Integer, nullable=True)
    description = Column(Text, nullable=False)
    logo_url = Column(Text, nullable=True)

    jobs = relationship("Job", back_populates="company", cascade="all, delete-orphan")


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("salary >= 0", name="jobs_salary_check"),
        CheckConstraint("equity <= 1.0", name="jobs_equity_check"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, nullable=True)
    equity = Column(Numeric, nullable=True)
    company_handle = Column(Text, ForeignKey("companies.handle", ondelete="CASCADE"), nullable=False)

    company = relationship("Company", back_populates="jobs")


class User(Base):
    __tablename__ = "users"

    username = Column(Text, primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())


class Application(Base):
    __tablename__ = "applications"

    username = Column(Text, ForeignKey("users.username", ondelete="CASCADE"), primary_key=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True)
