import pytest
from pyspark.sql.types import (
    ArrayType,
    BooleanType,
    DateType,
    DecimalType,
    DoubleType,
    IntegerType,
    LongType,
    MapType,
    StringType,
    StructField,
    StructType,
    TimestampType,
)

from hive_sync.ddl.plan import ColumnDef, PartitionValue, add_columns_sql, add_partition_sql, create_table_sql
from hive_sync.ddl.types import parse_type_name, type_to_ddl


@pytest.mark.parametrize(
    "dtype,expected",
    [
        (IntegerType(), "INT"),
        (LongType(), "BIGINT"),
        (DoubleType(), "DOUBLE"),
        (BooleanType(), "BOOLEAN"),
        (StringType(), "STRING"),
        (DateType(), "DATE"),
        (TimestampType(), "TIMESTAMP"),
        (DecimalType(18, 4), "DECIMAL(18,4)"),
    ],
)
def test_primitive_types(dtype, expected):
    assert type_to_ddl(dtype) == expected


def test_nested_types():
    struct = StructType([StructField("City", StringType()), StructField("Zip", IntegerType())])

    assert type_to_ddl(ArrayType(LongType())) == "ARRAY<BIGINT>"
    assert type_to_ddl(MapType(StringType(), DecimalType(10, 2))) == "MAP<STRING,DECIMAL(10,2)>"
    assert type_to_ddl(struct) == "STRUCT<city:STRING,zip:INT>"
    assert type_to_ddl(ArrayType(struct)) == "ARRAY<STRUCT<city:STRING,zip:INT>>"


def test_type_names_are_parsed():
    assert parse_type_name("int") == IntegerType()
    assert parse_type_name(" BIGINT ") == LongType()
    assert parse_type_name("decimal(10,2)") == DecimalType(10, 2)
    assert type_to_ddl("string") == "STRING"


def test_unknown_type_name_is_rejected():
    with pytest.raises(ValueError):
        parse_type_name("not_a_type")


def test_statement_builders():
    cols = [ColumnDef("id", "INT"), ColumnDef("name", "STRING")]

    assert create_table_sql("db.t", cols, "ORC") == "CREATE TABLE IF NOT EXISTS db.t (id INT, name STRING) STORED AS ORC"
    assert add_columns_sql("t", cols) == "ALTER TABLE t ADD COLUMNS (id INT, name STRING)"
    assert add_columns_sql("t", []) is None
    assert add_partition_sql("t", []) is None
    assert (
        add_partition_sql("t", [PartitionValue("dt", "2024-01-01"), PartitionValue("p", "a\\b")])
        == "ALTER TABLE t ADD IF NOT EXISTS PARTITION (dt='2024-01-01', p='a\\\\b')"
    )
