"""Flask UI and command line front ends over coach.Engine."""
