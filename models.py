from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, Numeric, JSON
from sqlalchemy.orm import relationship
from config.database import Base
from datetime import datetime

USER_ROLES = ("admin", "resident", "guard", "auditor")


class Society(Base):
    __tablename__ = "societies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(10), nullable=False)
    phone = Column(String(15), nullable=True)
    email = Column(String(255), nullable=True)
    total_flats = Column(Integer, default=0)
    admin_name = Column(String(255), nullable=True)
    admin_phone = Column(String(15), nullable=True)
    settings = Column(JSON, default=dict)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    users = relationship("User", back_populates="society")
    buildings = relationship("Building", back_populates="society")
    flats = relationship("Flat", back_populates="society")

    def __repr__(self):
        return f"<Society(id={self.id}, name={self.name})>"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), nullable=False, unique=True)
    password = Column(Text, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(15), nullable=False)
    role = Column(String(20), nullable=False, default="resident")
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=True, index=True)
    flat_number = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)
    preferences = Column(JSON, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    society = relationship("Society", back_populates="users")

    def __repr__(self):
        return f"<User(id={self.id}, role={self.role})>"


class Building(Base):
    __tablename__ = "buildings"

    id = Column(Integer, primary_key=True, index=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    floors = Column(Integer, nullable=False)
    flats_per_floor = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    society = relationship("Society", back_populates="buildings")
    flats = relationship("Flat", back_populates="building")


class Flat(Base):
    __tablename__ = "flats"

    id = Column(Integer, primary_key=True, index=True)
    building_id = Column(Integer, ForeignKey("buildings.id"), nullable=False)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    flat_number = Column(String(20), nullable=False)
    floor = Column(Integer, nullable=False)
    type = Column(String(50), nullable=True)  # 1BHK, 2BHK, etc.
    area = Column(Numeric(8, 2), nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    tenant_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    monthly_maintenance = Column(Numeric(10, 2), nullable=True)
    is_occupied = Column(Boolean, default=False)
    parking_slots = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    society = relationship("Society", back_populates="flats")
    building = relationship("Building", back_populates="flats")

    def resident_ids(self):
        return [uid for uid in (self.owner_id, self.tenant_id) if uid is not None]

    def __repr__(self):
        return f"<Flat(id={self.id}, flat_number={self.flat_number})>"
