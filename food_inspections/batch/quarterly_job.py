"""Spark job that reduces inspections to the quarterly worst-performer file."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql import Window, functions as F

from food_inspections.common.config import load_config

log = logging.getLogger(__name__)

OUTPUT_COLUMNS = ["Year-Quarter", "Facility_Type", "Failure_Rate", "Failures", "Total"]


class QuarterlyFailureJob:
    """Finds, for every quarter, the facility type with the highest failure rate."""

    def __init__(self, spark: SparkSession, min_inspections: int = 20) -> None:
        self.spark = spark
        self.min_inspections = max(int(min_inspections), 1)

    def load(self, path: str) -> DataFrame:
        return self.spark.read.csv(path, header=True, quote='"', escape='"')

    def run(self, inspections: DataFrame) -> DataFrame:
        raw_date = F.trim(F.col("Inspection_Date"))
        dated = (
            inspections.withColumn(
                "inspection_day",
                F.when(
                    raw_date.rlike(r"^\d{4}-\d{2}-\d{2}"),
                    F.to_date(F.substring(raw_date, 1, 10), "yyyy-MM-dd"),
                ).when(
                    raw_date.rlike(r"^\d{2}/\d{2}/\d{4}"),
                    F.to_date(F.substring(raw_date, 1, 10), "MM/dd/yyyy"),
                ),
            )
            .dropna(subset=("inspection_day",))
            .withColumn(
                "facility",
                F.when(
                    F.col("Facility_Type").isNull() | (F.trim(F.col("Facility_Type")) == ""),
                    F.lit("Unknown"),
                ).otherwise(F.trim(F.col("Facility_Type"))),
            )
            .withColumn("year", F.year("inspection_day"))
            .withColumn("quarter", F.quarter("inspection_day"))
            .withColumn("is_fail", F.when(F.trim(F.col("Results")) == "Fail", 1).otherwise(0))
        )

        grouped = (
            dated.groupBy("year", "quarter", "facility")
            .agg(F.count("*").alias("total"), F.sum("is_fail").alias("failures"))
            .filter(F.col("total") >= self.min_inspections)
            .withColumn("failure_rate", F.round(F.col("failures") * 100.0 / F.col("total"), 2))
        )

        # keep the worst performer per quarter
        window_spec = Window.partitionBy("year", "quarter").orderBy(
            F.col("failure_rate").desc(), F.col("failures").desc(), F.col("facility").asc()
        )
        worst = grouped.withColumn("rank", F.row_number().over(window_spec)).filter(F.col("rank") == 1)

        return worst.orderBy("year", "quarter").select(
            F.concat(F.col("year").cast("string"), F.lit("-Q"), F.col("quarter").cast("string")).alias(
                "Year-Quarter"
            ),
            F.col("facility").alias("Facility_Type"),
            F.col("failure_rate").cast("double").alias("Failure_Rate"),
            F.col("failures").cast("long").alias("Failures"),
            F.col("total").cast("long").alias("Total"),
        )

    @staticmethod
    def write(frame: DataFrame, output_path: str) -> int:
        """Write the (small) result as a JSON list of records; returns the row count."""

        target = Path(output_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        records = frame.select(OUTPUT_COLUMNS).toPandas()
        records.to_json(target, orient="records", indent=2)
        return len(records)


def main() -> None:
    parser = argparse.ArgumentParser(description="Build the quarterly failure-rate file.")
    parser.add_argument("--config", default="config/local.yaml", help="Path to YAML config.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)

    spark = (
        SparkSession.builder.appName("FoodInspectionQuarterlyFailures")
        .master("local[*]")
        .config("spark.sql.shuffle.partitions", "8")
        .config("spark.sql.ansi.enabled", "false")
        .getOrCreate()
    )

    try:
        job = QuarterlyFailureJob(spark, min_inspections=config.quarterly.min_inspections)
        inspections = job.load(config.quarterly.source_path)
        if inspections.rdd.isEmpty():
            raise RuntimeError(f"No inspections found in {config.quarterly.source_path}.")
        written = job.write(job.run(inspections), config.quarterly.output_path)
        log.info("Wrote %d quarters to %s", written, config.quarterly.output_path)
    finally:
        spark.stop()


if __name__ == "__main__":
    main()
