"""Infrastructure layer: conversion from and to external toolkits."""
