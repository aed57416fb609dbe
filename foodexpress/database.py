from sqlmodel import SQLModel, create_engine, Session
from .config import DATABASE_URL
from .models import MenuItem, Order

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)

def create_tables(bind=engine):
    SQLModel.metadata.create_all(bind, tables=[MenuItem.__table__, Order.__table__])

def get_session():
    with Session(engine) as session:
        yield session

create_tables()
