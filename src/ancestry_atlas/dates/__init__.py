from ancestry_atlas.dates.normalizer import normalize_date, year_of

__all__ = ["normalize_date", "year_of"]
