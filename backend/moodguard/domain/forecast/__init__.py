from .forecaster import MoodForecaster, forecast_accuracy, statistical_forecast

__all__ = ["MoodForecaster", "forecast_accuracy", "statistical_forecast"]
