# payrollpro/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from payrollpro.config import DATABASE_URL, SQL_ECHO

# ---------------------------
# MySQL goes through MySQL Connector (mysql+mysqlconnector://...);
# SQLite is the zero-setup default.
# ---------------------------
engine_kwargs = {"echo": SQL_ECHO}
if DATABASE_URL.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(DATABASE_URL, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    # import models so they register on Base.metadata
    from payrollpro.employees import models as _employees  # noqa: F401
    from payrollpro.payroll import models as _payroll  # noqa: F401
    from payrollpro.profiles import models as _profiles  # noqa: F401

    Base.metadata.create_all(bind=engine)
