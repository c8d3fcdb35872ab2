from fabricflow.extensions import db
from .base import BaseModel


class Block(BaseModel):
    """仓储区块"""
    __tablename__ = 'm_blocks'
    name = db.Column(db.String(64), unique=True, nullable=False)


class Rack(BaseModel):
    """仓储货架，name 即货架二维码内容"""
    __tablename__ = 'm_racks'
    name = db.Column(db.String(64), unique=True, nullable=False)


class RelaxationBlock(BaseModel):
    """松布区块"""
    __tablename__ = 'm_relaxation_blocks'
    name = db.Column(db.String(64), unique=True, nullable=False)


class RelaxationRack(BaseModel):
    """松布货架"""
    __tablename__ = 'm_relaxation_racks'
    name = db.Column(db.String(64), unique=True, nullable=False)
