__version__ = "0.1.0"

from bencodec.value import (Value,
                            BencodeDict,
                            BencodeList,
                            BencodeString,
                            BencodeInteger)
from bencodec.source import ByteSource, BytesSource, StreamSource
from bencodec.decoder import (BencodeDecoder,
                              NativeDecoder,
                              DecodeError,
                              DecodeIOError,
                              IntegerOverflow,
                              UnexpectedCharacter,
                              UnexpectedEndOfBuffer,
                              read,
                              decode,
                              loads)
from bencodec.encoder import (BencodeEncoder,
                              BencodeEncodeError,
                              write,
                              encode,
                              dumps)
from bencodec.helpers import (HelperDecodeError,
                              WrappedDecodeError,
                              BadTypeError,
                              MissingKeyError,
                              TextDecodeError,
                              decode_dict,
                              pop_value_integer,
                              pop_value_integer_option,
                              pop_value_bytestring,
                              pop_value_bytestring_option,
                              pop_value_utf8_string,
                              pop_value_utf8_string_option)
