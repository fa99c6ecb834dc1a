#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Exceptions de gpxtrack.

Deux erreurs fatales seulement : tout le reste (points mal formés,
éléments orphelins...) est remonté sous forme d'avertissements.
"""


class GpxTrackError(Exception):
    """Classe de base de toutes les erreurs gpxtrack."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class IoOrFormatError(GpxTrackError):
    """
    Le fichier ne peut pas être lu comme un GPX.

    Levée quand :
    - le fichier est absent ou illisible
    - le contenu est vide ou trop petit pour être un GPX
    - le XML est mal formé (balises non équilibrées, encodage invalide)
    """


class InsufficientData(GpxTrackError):
    """Levée quand une requête de position porte sur moins de deux points."""
