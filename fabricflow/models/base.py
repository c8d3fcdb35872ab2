from datetime import date, datetime, time
from fabricflow.extensions import db


class BaseModel(db.Model):
    """
    模型基类
    包含：ID主键, 创建时间, 更新时间, 软删除标记, 序列化方法
    """
    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    # 软删除标记：非空即视为已删除
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    # to_dict 中不输出的列
    __hidden__ = ('deleted_at',)

    @classmethod
    def live(cls):
        """未被软删除的记录 (所有读取都应从这里开始)"""
        return cls.query.filter(cls.deleted_at.is_(None))

    @classmethod
    def live_filter(cls):
        """软删除过滤条件，用于 join/子查询"""
        return cls.deleted_at.is_(None)

    def soft_delete(self):
        """标记删除，不提交事务"""
        self.deleted_at = datetime.now()

    def to_dict(self):
        """
        通用序列化方法：将模型转换为字典，便于 API 返回 JSON。
        过滤掉以 '_' 开头的私有属性。
        """
        data = {}
        for c in self.__table__.columns:
            if c.name.startswith('_') or c.name in self.__hidden__:
                continue
            val = getattr(self, c.name)
            if isinstance(val, (datetime, date, time)):
                data[c.name] = val.isoformat()
            else:
                data[c.name] = val
        return data
