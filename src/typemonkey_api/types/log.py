from logging import addLevelName

TRACE = 5

addLevelName(TRACE, "TRACE")
