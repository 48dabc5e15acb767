from sqlalchemy import BigInteger
from sqlalchemy.ext.compiler import compiles


class BigSerial(BigInteger):
    pass


@compiles(BigSerial, "postgresql")
def compile_bigserial(element, compiler, **kw):
    return "BIGSERIAL"


@compiles(BigSerial, "sqlite")
def compile_bigserial_sqlite(element, compiler, **kw):
    # only 'INTEGER PRIMARY KEY' is an alias of the sqlite rowid
    return "INTEGER"
