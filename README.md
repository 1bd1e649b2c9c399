# parquetlite

Low-level pieces for working with Apache Parquet data in pure Python:
schema tags, column statistics, value encodings and page compression.

## Installation

```
pip install parquetlite
```

This installs `lz4` and `zstandard`, which back the LZ4 and ZSTD codecs.

## Modules

- `parquetlite.format`: the metadata vocabulary as enums and dataclasses:
  `Type`, `ConvertedType`, `FieldRepetitionType`, `Encoding`,
  `CompressionCodec`, `TimeUnit`, `DecimalType`, `TimeType`, `TimestampType`,
  `IntType`, `LogicalType` and `SchemaElement`, plus `type_from_string` and
  `converted_type_from_string` (both raise `ValueError` for unknown names).
- `parquetlite.tags`: parses field tags such as
  `"name=age, type=INT32, convertedtype=INT_8"` into a `Tag` (`parse_tag`),
  builds a `SchemaElement` from it (`schema_element_from_tag`) and derives
  logical types from `logicaltype*` entries (`logical_type_from_fields`) or
  from a converted type (`logical_type_from_converted_type`). `key_tag` and
  `value_tag` give the tags of a map's key and value fields. Helpers:
  `string_to_variable_name`, `head_to_upper`, `str_to_int32`, `str_to_bool`.
  Malformed tags raise `ValueError`.
- `parquetlite.stats`: ordering rules for column statistics. `find_func_table`
  picks a `FuncTable` (`BoolFuncTable`, `Int32FuncTable`, `UInt32FuncTable`,
  `Int64FuncTable`, `UInt64FuncTable`, `Int96FuncTable`, `Float32FuncTable`,
  `Float64FuncTable`, `StringFuncTable`, `IntervalFuncTable`,
  `DecimalStringFuncTable`) from the physical, converted and logical type,
  and raises `ValueError` when none applies. Each table has `less_than` and
  `min_max_size`; `minimum` and `maximum` treat `None` as absent.
  `cmp_int_binary` compares integers stored as little- or big-endian bytes.
- `parquetlite.paths`: column path strings joined by `"\x01"`
  (`reform_path_str`, `path_to_str`, `str_to_path`, `path_str_index`,
  `is_child_path`), an approximate byte size of values (`size_of`), and
  `new_table` / `transpose_table` for row and column tables.
- `parquetlite.binary`: little-endian fixed-width numbers read from a binary
  stream (`read_int32`, `read_int64`, `read_float32`, `read_float64`; a short
  stream raises `EOFError`) and packed into bytes (`pack_int32`, `pack_int64`,
  `pack_float32`, `pack_float64`).
- `parquetlite.encoder`: PLAIN (`write_plain` and one `write_plain_*` per
  physical type), unsigned varints, RLE runs with or without the hybrid
  length prefix, bit packing (current and deprecated order),
  DELTA_BINARY_PACKED (`write_delta`, `write_delta_int32`,
  `write_delta_int64`), DELTA_LENGTH_BYTE_ARRAY, DELTA_BYTE_ARRAY and
  BYTE_STREAM_SPLIT. Text values are encoded as UTF-8.
- `parquetlite.decoder`: the matching readers, taking a binary stream such as
  `io.BytesIO`: `read_plain` and `read_plain_*`, `read_unsigned_varint`,
  `read_rle`, `read_bit_packed`, `read_rle_bit_packed_hybrid`,
  `read_delta_binary_packed_int32`, `read_delta_binary_packed_int64`,
  `read_delta_length_byte_array`, `read_delta_byte_array`,
  `read_byte_stream_split_float32` and `read_byte_stream_split_float64`.
  Byte-array values come back as `bytes`.
- `parquetlite.snappy`: a pure-Python Snappy block `compress` and
  `decompress`; corrupt input raises `ValueError`.
- `parquetlite.compression`: page codecs by `CompressionCodec`:
  UNCOMPRESSED, SNAPPY, GZIP, LZ4 (frame format), LZ4_RAW (bare block) and
  ZSTD. `get_compressor` returns a `Compressor` with `compress` and
  `uncompress` functions; `compress` and `uncompress` call them directly.
  LZO and BROTLI are not supported and raise `ValueError`.

## Examples

Parse a field tag and build its schema element:

```python
from parquetlite.tags import parse_tag, schema_element_from_tag

tag = parse_tag("name=age, type=INT32, convertedtype=INT_8")
element = schema_element_from_tag(tag)
assert element.name == "Age"
assert element.logical_type.integer.bit_width == 8
```

Encode and decode a column of values:

```python
import io
from parquetlite.encoder import write_delta_int64
from parquetlite.decoder import read_delta_binary_packed_int64

data = write_delta_int64([1, 2, 3, 4])
assert read_delta_binary_packed_int64(io.BytesIO(data)) == [1, 2, 3, 4]
```

Compress a page:

```python
from parquetlite.format import CompressionCodec
from parquetlite.compression import compress, uncompress

packed = compress(b"test data", CompressionCodec.GZIP)
assert uncompress(packed, CompressionCodec.GZIP) == b"test data"
```

Track column statistics:

```python
from parquetlite.format import Type
from parquetlite.stats import find_func_table

table = find_func_table(Type.INT32, None, None)
low, high, size = table.min_max_size(None, None, 7)
assert (low, high, size) == (7, 7, 4)
```

## What it does not do

parquetlite works on values, pages and metadata objects only. It does not
open, read or write whole Parquet files: there is no file reader or writer,
no footer or page-header serialisation, no row groups, and no mapping of
records onto columns with repetition and definition levels. There is no
command-line tool.

## Running the tests

```
pip install "parquetlite[test]"
pytest
```