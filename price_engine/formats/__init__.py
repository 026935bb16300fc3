"""Форматы валют: правила, загрузка из YAML, реестр."""
