from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, field_validator

INDENT = "    "
MAX_LINE = 88


def indent(text: str, level: int = 1) -> str:
    """Отступ для каждой непустой строки"""
    prefix = INDENT * level
    return "\n".join(prefix + line if line.strip() else "" for line in text.split("\n"))


class Variable(BaseModel):
    """Выражение типа: значение с необязательной оберткой (List, Optional, ...)"""

    value: List[Union["Variable", str]] = []
    wrap_name: Optional[str] = None

    @field_validator("value", mode="before")
    def value_check(cls, value):
        if not isinstance(value, list):
            return [value]
        return value

    def __str__(self):
        inner = ", ".join(str(_) for _ in self.value)

        if self.wrap_name is None:
            return inner

        return f"{self.wrap_name}[{inner}]" if inner else "Any"


class Parameter(BaseModel):
    name: str

    default: Optional[Variable] = None
    var_type: Optional[Variable] = None

    order: int = 0

    def set_default(self, default: Union[str, Variable], **kwargs):
        if isinstance(default, str):
            default = Variable(value=default, **kwargs)

        self.default = default

    def set_type(self, var_type: Union[str, Variable], **kwargs):
        if isinstance(var_type, str):
            var_type = Variable(value=var_type, **kwargs)

        self.var_type = var_type

    def __str__(self):
        return (
            self.name
            + (f": {self.var_type}" if self.var_type else "")
            + (f" = {self.default}" if self.default else "")
        )


class CodeBlock(BaseModel):
    order: int = 0
    code: str = "pass"

    def __str__(self):
        return self.code.replace("\t", INDENT)


class Function(BaseModel):
    name: str
    parameters: List[Parameter] = []
    response: str = "None"

    async_def: bool = False
    decorators: List[str] = []

    description: Optional[str] = None

    code: CodeBlock = CodeBlock(order=0, code="pass")

    order: int = 0

    def signature(self) -> str:
        # Параметры без значения по умолчанию - первыми
        parameters = [
            str(_) for _ in sorted(self.parameters, key=lambda x: bool(x.default))
        ]
        head = f"{'async ' if self.async_def else ''}def {self.name}("
        tail = f") -> {self.response}:"

        one_line = head + ", ".join(parameters) + tail
        if len(one_line) <= MAX_LINE:
            return one_line

        return head + "\n" + indent(",\n".join(parameters) + ",") + "\n" + tail

    def __str__(self) -> str:
        body = []
        if self.description:
            body.append(f'"""{self.description}"""')
        body.append(str(self.code))

        return "\n".join(
            self.decorators + [self.signature(), indent("\n".join(body))]
        )

    def set_code_block(self, code_block: Union["CodeBlock", str]) -> "Function":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block)

        self.code = code_block
        return self


class Class(BaseModel):
    name: str

    functions: Dict[str, "Function"] = {}
    classes: Dict[str, "Class"] = {}

    code_blocks: List["CodeBlock"] = []
    parameters: List[Parameter] = []

    inherits: List[str] = []
    description: Optional[str] = None

    order: int = 0

    def _members(self) -> List[str]:
        members = sorted(
            self.parameters
            + self.code_blocks
            + list(self.functions.values())
            + list(self.classes.values()),
            key=lambda x: x.order,
            reverse=True,
        )

        rendered = []
        previous = None
        for member in members:
            # Поля класса идут подряд, остальное отделяется пустой строкой
            if rendered and not (
                isinstance(member, Parameter) and isinstance(previous, Parameter)
            ):
                rendered.append("")
            rendered.append(str(member))
            previous = member
        return rendered

    def __str__(self) -> str:
        header = (
            f"class {self.name}"
            + (f"({', '.join(self.inherits)})" if self.inherits else "")
            + ":"
        )

        body = []
        if self.description:
            body.append(f'"""{self.description}"""')
            body.append("")

        members = self._members()
        body.extend(members)
        if not members:
            if body:
                body.pop()
            else:
                body.append("pass")

        return header + "\n" + indent("\n".join(body))

    def add_function(self, function: Union["Function", str], **kwargs) -> "Function":
        if isinstance(function, str):
            function = Function(name=function, **kwargs)

        self.functions[function.name] = function

        return function

    def add_class(self, cls: Union["Class", str], **kwargs) -> "Class":
        if isinstance(cls, str):
            cls = Class(name=cls, **kwargs)

        self.classes[cls.name] = cls

        return cls

    def add_code_block(self, code_block: Union["CodeBlock", str], **kwargs) -> "Class":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block, **kwargs)

        self.code_blocks.append(code_block)
        return self


class CodeFile(BaseModel):
    file_name: str

    # Ключ артефакта: (пространство имен, имя)
    namespace: str = ""
    artifact: str = ""

    imports: List[str] = []
    functions: Dict[str, "Function"] = {}
    classes: Dict[str, "Class"] = {}
    code_blocks: List["CodeBlock"] = []

    def __str__(self):
        members = sorted(
            self.code_blocks + list(self.functions.values()) + list(self.classes.values()),
            key=lambda x: x.order,
            reverse=True,
        )

        parts = []
        if self.imports:
            parts.append("\n".join(self.imports))
        parts.extend(str(_) for _ in members)

        text = "\n\n\n".join(_.strip("\n") for _ in parts if _.strip())
        return text.replace("\t", INDENT) + "\n"

    def add_function(self, function: Union["Function", str], **kwargs) -> "Function":
        if isinstance(function, str):
            function = Function(name=function, **kwargs)

        self.functions[function.name] = function

        return function

    def add_class(self, cls: Union["Class", str], **kwargs) -> "Class":
        if isinstance(cls, str):
            cls = Class(name=cls, **kwargs)

        self.classes[cls.name] = cls

        return cls

    def add_code_block(
        self, code_block: Union["CodeBlock", str], **kwargs
    ) -> "CodeFile":
        if isinstance(code_block, str):
            code_block = CodeBlock(code=code_block, **kwargs)

        self.code_blocks.append(code_block)
        return self

    def get_object(self, path: str):
        """Поиск класса или функции по пути вида 'Class.Nested.method'"""
        current = self

        for name in path.split("."):
            found = current.classes.get(name) or current.functions.get(name)
            if found is None:
                return None
            current = found
            if isinstance(current, Function):
                break

        return current


Class.model_rebuild()
CodeFile.model_rebuild()


class Project(BaseModel):
    name: str
    files: List[CodeFile] = []

    def add_file(self, file_name: Union["CodeFile", str], **kwargs) -> "CodeFile":
        if isinstance(file_name, str):
            file_name = CodeFile(file_name=file_name, **kwargs)

        self.files.append(file_name)
        return file_name

    def get_file(self, file_name: str) -> Optional[CodeFile]:
        for code_file in self.files:
            if code_file.file_name == file_name:
                return code_file
        return None

    def artifacts(self) -> Dict[Tuple[str, str], str]:
        """Отображение (пространство имен, имя артефакта) -> исходный текст"""
        return {
            (code_file.namespace, code_file.artifact or code_file.file_name): str(code_file)
            for code_file in self.files
        }
