from kubearmctl.cli import main

main()
