# cukejson/runtime package
# Conversion pipeline from Cucumber Messages to the legacy Cucumber JSON report.
#
# Core components:
#   - envelope_store: per-kind index over the input batch
#   - resolvers: identifier chain resolution (results, step definitions)
#   - assembler: feature -> elements -> steps report tree
#   - schema_validator: JSON schema checks for batches and reports
#   - report_io: batch reading and atomic report writing
#   - formatter: convert_batch / convert_file entry points
