"""Protocol and presentation constants."""
