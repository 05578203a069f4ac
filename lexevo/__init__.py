"""lexevo – diachronic simulation of a small constructed lexicon."""
