# Database package: engine, sessions and table models
