"""
事务工具
一次请求内的批量写入要么全部提交，要么全部回滚
"""
from contextlib import contextmanager
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from fabricflow.extensions import db
from fabricflow.exceptions import CheckpointException, InternalError


@contextmanager
def atomic():
    """
    原子事务作用域
    使用方法:
    with atomic() as session:
        session.add(...)
    业务异常回滚后原样抛出；数据库异常回滚后转换为 InternalError
    """
    session = db.session
    try:
        yield session
        session.commit()
    except CheckpointException:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        current_app.logger.exception('数据库事务失败，已回滚')
        raise InternalError('database error: ' + e.__class__.__name__) from e
    except Exception:
        session.rollback()
        raise
