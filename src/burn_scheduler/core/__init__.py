"""Pure scheduling computation: models, calorie model, targets, selection, horizon."""
