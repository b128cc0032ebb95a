"""值对象基类"""


class BaseValueObject:
    """
    值对象基类

    子类应使用 ``@dataclass(frozen=True)`` 声明，并在 ``validate`` 中
    实现自身的校验规则。校验在实例创建后自动执行。
    """

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """校验值对象，默认不做任何检查"""
        return None
