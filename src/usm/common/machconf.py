WORD_BITS = 64
WORD_MASK = (1 << WORD_BITS) - 1
WORD_MIN = -(1 << (WORD_BITS - 1))
WORD_MAX = (1 << (WORD_BITS - 1)) - 1

INPUT_PROMPT = 'Enter input: '

EXIT_HALT = 0
EXIT_PARSE_ERROR = 1
EXIT_KEYBOARD = 3
EXIT_EXEC_ERROR = 100

# Word packing for two's complement wrap-around
WORD_FMT_SIGNED = '>q'
WORD_FMT_UNSIGNED = '>Q'
