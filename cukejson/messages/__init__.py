# cukejson/messages package
# Pydantic models for the Cucumber Messages payloads used in conversion.
