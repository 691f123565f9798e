"""Export services: conversion, orchestration, destinations and type catalog."""
