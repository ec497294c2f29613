"""Repositories: acceso a datos sin commits"""
