import dataclasses as dc
import enum

from typing import Optional as Opt

### TYPES AND SIGNATURES ###

# Type is closed: int is the only data type a variable may hold,
# void only ever appears as the result of a call or an assignment

class Type(enum.Enum):
    INT  = 'int'
    VOID = 'void'

    def __str__(self):
        return self.value

    @property
    def is_data_type(self):
        return self is Type.INT

# --------------------------------------------------------------------
@dc.dataclass(frozen = True)
class FuncSig:
    return_type : Type
    param_types : tuple[Type, ...]
    span        : Opt["Span"] = None    # None for built-ins

    def __str__(self):
        params = ", ".join(str(t) for t in self.param_types)
        return f"({params}) -> {self.return_type}"

    def pprint(self, name: str):
        return f"{name}{self}"

@dc.dataclass
class VarSig:
    data_type    : Type
    mutable      : bool
    span         : "Span"
    used_count   : int = 0
    changed_count: int = 0
