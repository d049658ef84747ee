"""Randevu booking platform API"""
