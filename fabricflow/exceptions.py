class CheckpointException(Exception):
    """检查点系统基础异常类"""
    code = 500

    def __init__(self, message, code=None, payload=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.payload = payload

    def to_dict(self):
        rv = {
            'status': 'error',
            'error': True,
            'message': self.message,
        }
        if self.payload is not None:
            rv['errors'] = self.payload
        return rv


class ValidationError(CheckpointException):
    """输入校验失败 (缺字段、非法阶段、同一货架搬迁等)"""
    code = 422

    def __init__(self, message="Invalid data", payload=None):
        super().__init__(message, payload=payload)


class Unauthorized(CheckpointException):
    """缺少或无效的访问令牌"""
    code = 401

    def __init__(self, message="Unauthorized", payload=None):
        super().__init__(message, payload=payload)


class NotFound(CheckpointException):
    """面料编码或货架不存在"""
    code = 404

    def __init__(self, message="Not found", payload=None):
        super().__init__(message, payload=payload)


class Conflict(CheckpointException):
    """业务规则失败，整批回滚"""
    code = 422


class InternalError(CheckpointException):
    """数据库或其他 I/O 异常"""
    code = 500

    def __init__(self, message="Internal server error", payload=None):
        super().__init__(message, payload=payload)
